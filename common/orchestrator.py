# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Runs a provisioning flow as an ordered list of named tasks.
"""

import logging
import sys
from typing import Any, Callable, Dict, List, Optional


class Orchestrator:
    """
    Holds the tasks of one flow and runs them in order.

    Each task is called as ``func(*args, context=..., app_settings=..., **kwargs)``.
    The context dict is shared by all tasks; a task's return value is stored
    in it as ``"<task name>_result"``. A failing fatal task ends the process
    with exit status 1, so nothing after it runs.
    """

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Dict[str, Any]] = []
        self.context: Dict[str, Any] = {}
        self.failed_tasks: List[str] = []

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        fatal: bool = True,
    ) -> None:
        self.tasks.append(
            {
                "name": name,
                "func": func,
                "args": list(args or []),
                "kwargs": dict(kwargs or {}),
                "fatal": fatal,
            }
        )
        self.logger.debug(f"Queued task {len(self.tasks)}: {name}")

    def task_names(self) -> List[str]:
        return [task["name"] for task in self.tasks]

    def _run_task(self, task: Dict[str, Any]) -> Any:
        call_kwargs = dict(task["kwargs"])
        call_kwargs["context"] = self.context
        call_kwargs["app_settings"] = self.app_settings
        return task["func"](*task["args"], **call_kwargs)

    def run(self) -> bool:
        """
        Runs every task in order.

        Returns:
            True once all tasks ran; non-fatal failures are listed in
            failed_tasks.

        Raises:
            SystemExit: With status 1 when a fatal task fails.
        """
        total = len(self.tasks)
        self.failed_tasks = []
        for position, task in enumerate(self.tasks, start=1):
            name = task["name"]
            self.logger.info(f"--- [{position}/{total}] {name} ---")
            try:
                self.context[f"{name}_result"] = self._run_task(task)
            except Exception as e:
                self.logger.critical(f"🔥 {name} failed: {e}", exc_info=True)
                if task["fatal"]:
                    self.logger.error("Stopping: later steps depend on this one.")
                    sys.exit(1)
                self.failed_tasks.append(name)
                self.logger.warning(f"{name} is optional; continuing.")
                continue
            self.logger.info(f"✅ {name} done.")

        if self.failed_tasks:
            self.logger.warning("Orchestration finished with non-fatal failures.")
        else:
            self.logger.info("✨ All steps completed.")
        return True

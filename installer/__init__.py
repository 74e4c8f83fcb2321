"""
Installers for the provisioning flows.

Each module installs one piece of software on a target (the host or an LXC
container): base packages, MySQL, TYPO3, SOGo and the container itself.
"""

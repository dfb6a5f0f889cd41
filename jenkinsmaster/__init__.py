"""JenkinsMaster CLI - deploy a Jenkins controller to Hetzner Cloud or an existing host."""

__version__ = "1.0.0"

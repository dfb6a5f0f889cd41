"""JenkinsMaster CLI commands"""

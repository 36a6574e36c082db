"""
Bundled tasks

Every module in this package is searched for BaseTask subclasses by
TaskRegistry.discover_tasks("taskopts.tasks").
"""

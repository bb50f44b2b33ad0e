"""Core domain package for boards-link-check.

Core contains work item extraction, the verdict rules and event filtering
without any GitHub HTTP or webhook server code, keeping the business logic
portable.
"""

"""
API routers package.

Contains the chat, admin and health routers registered by the application
factory in ``support_assistant.main``.
"""

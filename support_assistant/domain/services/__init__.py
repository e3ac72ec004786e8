"""
Domain Services Package.

Service classes implementing the assistant's business logic: the intent
catalog holder, online learning, session storage, the resolution state
machine and the AssistantService composition root that owns them.
"""

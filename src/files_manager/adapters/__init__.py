"""
Adapter layer for the Files Manager.

Contains the session store (Redis), local payload storage and the thumbnail
job queue (local/Redis/SQS). Each adapter is constructed explicitly and handed
to the services that need it.
"""

"""
Document store adapters shared by the API and the thumbnail workers.
"""

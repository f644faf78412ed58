"""
Thumbnail worker: consumes image upload jobs from the queue and writes
500, 250 and 100 pixel wide copies next to the original payload.
"""

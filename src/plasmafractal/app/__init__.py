"""
The APP layer is the windowing collaborator of the core.
It owns the pixel buffer on screen, turns clicks into regeneration requests
and runs the renderer off the GUI thread.
"""

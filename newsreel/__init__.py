"""
newsreel: render orchestration core for automated short-form news videos.

Turns a news script plus narration into a frame-accurate data contract and
drives the external render engine that produces the final video.
"""

__version__ = "0.1.0"

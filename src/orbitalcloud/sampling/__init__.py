"""
The SAMPLING layer turns a density into a fixed-length weighted point cloud:
bounding boxes, the adaptive rejection loop, vertex assembly, the request
dispatcher and background workers.
"""

"""
Domain layer: entities parsed from the cog index, the catalog
pipeline and the pydantic models shared with the web layer.
"""

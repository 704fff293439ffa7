"""
Searchable, paginated browser for the Red Discord Bot cog index.
"""

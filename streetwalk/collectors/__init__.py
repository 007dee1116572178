"""
Data collectors for the street importer

- osm: Streets from OpenStreetMap via the Overpass API
"""

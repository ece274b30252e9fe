"""File and document I/O for vpkg.

Import from submodules:
- documents: registry index / manifest parsing
- installed: installed package metadata files and the installed package index
"""

"""
repositorio – academic project repository built from a public Google Sheet.

The package fetches the "Projetos", "Calendario" and "Orientadores" tabs,
normalizes the rows into fixed-shape records and renders the static pages
(repository listing, project detail, calendar, advisors).
"""

__version__ = "0.1.0"

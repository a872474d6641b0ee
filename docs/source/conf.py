"""Configuration file for the Sphinx documentation builder."""

# -- Project information

from smallmodbus import __version__ as smallmodbus_version

project = "smallModbus"
copyright = "2025, smallModbus developers"  # noqa: A001
author = "smallModbus developers"

release = smallmodbus_version
version = smallmodbus_version

# -- General configuration

extensions = [
    "sphinx.ext.doctest",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx_rtd_theme",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinxcontrib.mermaid",
]

autoclass_content = "both"
autodoc_member_order = "bysource"
autodoc_typehints = "description"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3/", None),
}
intersphinx_disabled_domains = ["std"]

pygments_style = "sphinx"

# -- Options for HTML output

html_theme = "sphinx_rtd_theme"

"""Sphinx configuration file."""

from importlib.metadata import version as get_version

project = "solarlens"
copyright = "2026, solarlens developers"
author = "solarlens developers"
release = get_version("solarlens")
version = ".".join(release.split(".")[:2])  # e.g. "0.1" from "0.1.0"

# -- General configuration ---------------------------------------------------

extensions = [
    "myst_nb",
    "autoapi.extension",
    "sphinx.ext.autodoc",
    "sphinx.ext.viewcode",
    "sphinx.ext.mathjax",
]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store", "jupyter_execute"]

autoapi_dirs = ["../src"]
autoapi_options = ["members", "undoc-members", "show-inheritance", "imported-members"]
autoapi_member_order = "groupwise"
autodoc_typehints = "description"

myst_enable_extensions = ["amsmath", "dollarmath"]

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_book_theme"
master_doc = "index"
html_title = "solarlens - Exoplanet Detection Behind the Solar Gravitational Lens"

html_theme_options = {
    "show_toc_level": 2,
}
html_context = {
    "default_mode": "dark",
}
source_suffix = {
    ".rst": "restructuredtext",
    ".md": "myst-nb",
}
nb_execution_mode = "off"

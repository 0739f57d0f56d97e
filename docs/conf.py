# Sphinx configuration for the Gallery docs (docs/index.rst).

import os
import sys

sys.path.insert(0, os.path.abspath(".."))

# autodoc importa os models; Django precisa estar configurado antes
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "example.project.settings")
import django
django.setup()

project = "Django Gallery"
author = "Django Gallery Contributors"
release = "0.1.0"

extensions = [
    "sphinx.ext.autodoc",           # gallery.services.sync, gallery.client, models
    "sphinx.ext.napoleon",          # Args:/Returns: nos docstrings
    "sphinxcontrib.httpdomain",     # rotas /Product/*
]

master_doc = "index"
exclude_patterns = ["_build"]

html_theme = "furo"

autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
}
autodoc_typehints = "description"

napoleon_google_docstring = True
napoleon_numpy_docstring = False

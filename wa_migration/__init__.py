"""
Top-level package for the Wild Apricot → block migration utility.

This package bundles all components required to turn a crawl of a Wild
Apricot site into a reviewable migration project: converting custom HTML
into typed content blocks, classifying the scripts found along the way,
reading the configuration of vendor gadgets, extracting the site theme and
tracking every page through review.  Modules are split into subpackages:

* :mod:`wa_migration.models` – pydantic records for blocks, crawl input and projects
* :mod:`wa_migration.parsers` – block contract, HTML converter and script analyzer
* :mod:`wa_migration.extractors` – widget configuration and theme extraction
* :mod:`wa_migration.utils` – error reporting and readiness summaries

Project lifecycle functions live in :mod:`wa_migration.project`; the
orchestration of a full run is handled in :mod:`wa_migration.migration_tool`.
"""

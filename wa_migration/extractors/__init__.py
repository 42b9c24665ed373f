"""
Extractors for crawled Wild Apricot content.

The widget config extractor reads the settings of vendor gadgets (event
lists, slideshows, menus, ...) so they can be recreated as native widgets;
the theme extractor aggregates colors, fonts and button styles across all
crawled pages.
"""

"""Translation tables shipped with the package.

``<code>.json`` holds the translation tree of one locale (a ``js`` tree plus
optional extras trees such as ``admin_js``); ``dates/<code>.json`` holds its
calendar data. Both are read through importlib.resources so they resolve
the same way from a checkout and from an installed wheel.
"""

"""wpconflicts: Composer conflicts from WordPress vulnerability feeds.

This package turns Wordfence vulnerability records into a Composer
``conflicts`` section so known-vulnerable versions of WordPress core,
plugins and themes cannot be installed.
"""

__version__ = "0.1.0"

# Routes package init
"""
Snippetbox Backend - Routes Package
====================================

Route Inventory:
    - home.py:      GET  /                       (home page)
    - snippets.py:  GET  /snippet/view?id=<int>  (plain-text snippet)
                    POST /snippet/create         (insert, 303 to view)

Routes stay THIN: parse the request, call the repository, return a response.
Failures are raised, never formatted here.
"""

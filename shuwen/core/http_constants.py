"""Constantes HTTP pour éviter les valeurs magiques dans le code.

Codes de statut utilisés par les routes et les tests du shell HTTP.
"""

HTTP_OK = 200
HTTP_NO_CONTENT = 204
HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE_ENTITY = 422

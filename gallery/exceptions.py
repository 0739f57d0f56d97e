"""
Gallery Exceptions — Exceções específicas da Galeria.

Todas as exceções seguem o padrão:
- code: Código máquina do erro (ex.: "http_error", "invalid_payload")
- message: Mensagem legível para humanos
- context: Dados adicionais sobre o erro
"""

from __future__ import annotations


class GalleryError(Exception):
    """
    Classe base para todas as exceções da Galeria.

    Attributes:
        code: Código máquina do erro
        message: Mensagem legível para humanos
        context: Dados adicionais sobre o erro
    """

    def __init__(self, code: str = "error", message: str = "", context: dict | None = None):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)


class CatalogApiError(GalleryError):
    """
    Falha ao consultar a API de catálogo remota.

    Codes: "http_error", "network_error", "invalid_payload"
    """

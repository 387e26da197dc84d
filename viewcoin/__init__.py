"""viewcoin - quanto vale uma contagem de visualizações em cripto"""

__version__ = "1.0.0"

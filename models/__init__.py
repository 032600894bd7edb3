# Inicialização do SQLAlchemy e importação dos modelos do sistema
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()  # Instância global do banco de dados


@event.listens_for(Engine, 'connect')
def _ativar_foreign_keys_sqlite(dbapi_connection, connection_record):
    # SQLite só aplica chaves estrangeiras com o PRAGMA ligado por conexão
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


# Importação dos modelos para registro no SQLAlchemy
from .usuario import Usuario
from .categoria import Categoria
from .plataforma import Plataforma
from .item import Item, EM_STOCK, VENDIDO, STATUS_VALIDOS

# O app lê DATABASE_URL no import: os testes usam SQLite em memória
import os

os.environ['DATABASE_URL'] = 'sqlite://'

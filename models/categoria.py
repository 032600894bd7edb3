"""Modelo Categoria: tabela de nomes por usuário.

Criada sob demanda no cadastro de item; o nome é único por usuário via
UniqueConstraint, o que permite o upsert por (usuario_id, nome).
"""
from . import db


class Categoria(db.Model):
    __tablename__ = 'categoria'
    id = db.Column(db.Integer, primary_key=True)
    usuario_id = db.Column(db.Integer, db.ForeignKey('usuario.id', ondelete='CASCADE'), nullable=False)
    nome = db.Column(db.String(100), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('usuario_id', 'nome', name='uq_categoria_usuario_nome'),
    )

    def __repr__(self):
        return f'<Categoria {self.nome}>'

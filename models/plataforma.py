# Modelo Plataforma: onde o item foi vendido (Vinted, OLX...), único por usuário
from . import db


class Plataforma(db.Model):
    __tablename__ = 'plataforma'
    id = db.Column(db.Integer, primary_key=True)
    usuario_id = db.Column(db.Integer, db.ForeignKey('usuario.id', ondelete='CASCADE'), nullable=False)
    nome = db.Column(db.String(100), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('usuario_id', 'nome', name='uq_plataforma_usuario_nome'),
    )

    def __repr__(self):
        return f'<Plataforma {self.nome}>'

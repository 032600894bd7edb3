"""Modelo Item: uma peça comprada para revenda.

As regras do ciclo de vida ficam no banco (CheckConstraint):
- status é EM_STOCK ou VENDIDO;
- preço, data e plataforma de venda existem se e somente se status = VENDIDO;
- a data de venda nunca é anterior à data de compra.

Lucro e dias de hold são derivados e expostos como propriedades.
"""
from . import db
from datetime import date, datetime

EM_STOCK = 'EM_STOCK'
VENDIDO = 'VENDIDO'
STATUS_VALIDOS = (EM_STOCK, VENDIDO)


class Item(db.Model):
    __tablename__ = 'item'
    id = db.Column(db.Integer, primary_key=True)
    usuario_id = db.Column(db.Integer, db.ForeignKey('usuario.id', ondelete='CASCADE'), nullable=False)
    titulo = db.Column(db.String(200), nullable=False)
    notas = db.Column(db.Text, nullable=True)
    preco_compra = db.Column(db.Float, nullable=False)  # Já com fees incluídas
    data_compra = db.Column(db.Date, nullable=False)
    categoria_id = db.Column(db.Integer, db.ForeignKey('categoria.id'), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=EM_STOCK)
    # Campos de venda (apenas quando VENDIDO)
    preco_venda = db.Column(db.Float, nullable=True)
    data_venda = db.Column(db.Date, nullable=True)
    plataforma_id = db.Column(db.Integer, db.ForeignKey('plataforma.id'), nullable=True)
    criado_em = db.Column(db.DateTime, default=datetime.utcnow)

    categoria = db.relationship('Categoria', backref='itens')
    plataforma = db.relationship('Plataforma', backref='itens')

    __table_args__ = (
        db.CheckConstraint("status IN ('EM_STOCK', 'VENDIDO')", name='ck_item_status'),
        db.CheckConstraint(
            "(status = 'VENDIDO' AND preco_venda IS NOT NULL AND data_venda IS NOT NULL AND plataforma_id IS NOT NULL)"
            " OR "
            "(status = 'EM_STOCK' AND preco_venda IS NULL AND data_venda IS NULL AND plataforma_id IS NULL)",
            name='ck_item_campos_venda',
        ),
        db.CheckConstraint('data_venda IS NULL OR data_venda >= data_compra', name='ck_item_data_venda'),
    )

    @property
    def vendido(self):
        return self.status == VENDIDO

    @property
    def lucro(self):
        """preco_venda - preco_compra; None enquanto o item não foi vendido."""
        if not self.vendido or self.preco_venda is None:
            return None
        return self.preco_venda - self.preco_compra

    @property
    def dias_hold(self):
        """Dias entre compra e venda (ou até hoje, se ainda em stock)."""
        fim = self.data_venda if self.data_venda is not None else date.today()
        return (fim - self.data_compra).days

    def marcar_vendido(self, preco_venda, data_venda, plataforma_id):
        self.status = VENDIDO
        self.preco_venda = preco_venda
        self.data_venda = data_venda
        self.plataforma_id = plataforma_id

    def desmarcar_venda(self):
        self.status = EM_STOCK
        self.preco_venda = None
        self.data_venda = None
        self.plataforma_id = None

    def __repr__(self):
        return f'<Item {self.titulo} {self.status}>'

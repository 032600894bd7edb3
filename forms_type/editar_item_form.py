"""Formulário de edição de item.

Os campos de venda só são obrigatórios quando o item já está VENDIDO; a view
informa isso em `vendido` antes de validar. Vender/desvender tem fluxo próprio.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, DecimalField, DateField, SelectField, SubmitField
from wtforms.validators import DataRequired, NumberRange, Length, Optional

from .cadastro_item_form import strip_filter, valor_finito


def int_ou_none(valor):
    if valor in (None, '', 'None'):
        return None
    return int(valor)


def vazio_para_none(valor):
    valor = strip_filter(valor)
    return valor or None


class EditarItemForm(FlaskForm):
    titulo = StringField('Produto', validators=[DataRequired(), Length(max=200)], filters=[strip_filter])
    notas = TextAreaField('Notas', filters=[vazio_para_none], render_kw={"rows": 3})
    preco_compra = DecimalField('Preço compra (€)', places=2, validators=[DataRequired(), valor_finito, NumberRange(min=0)])
    data_compra = DateField('Data compra', validators=[DataRequired()])
    categoria_id = SelectField('Categoria', coerce=int, validators=[DataRequired()])
    # Venda (só se vendido)
    preco_venda = DecimalField('Preço venda (€)', places=2, validators=[Optional(), valor_finito, NumberRange(min=0)])
    data_venda = DateField('Data venda', validators=[Optional()])
    plataforma_id = SelectField('Plataforma', coerce=int_ou_none, validators=[Optional()])
    submit = SubmitField('Guardar')

    vendido = False

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators):
            return False
        if not self.vendido:
            return True
        obrigatorios = (
            (self.preco_venda, 'Preço de venda inválido'),
            (self.data_venda, 'Data de venda inválida'),
            (self.plataforma_id, 'Plataforma inválida'),
        )
        valido = True
        for campo, mensagem in obrigatorios:
            if not campo.data:
                campo.errors = list(campo.errors) + [mensagem]
                valido = False
        return valido

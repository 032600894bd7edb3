# Formulário para registrar uma compra (novo item em stock)
from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, DateField, SelectField, SubmitField
from wtforms.validators import DataRequired, NumberRange, Length, ValidationError, StopValidation

NOVA = 'new'  # Valor do select que pede a criação de uma categoria/plataforma


def strip_filter(valor):
    return valor.strip() if isinstance(valor, str) else valor


def valor_finito(form, field):
    # Decimal aceita "Infinity" e "NaN"; nenhum dos dois é um preço
    if field.data is not None and not field.data.is_finite():
        raise StopValidation('Valor inválido')


class CadastroItemForm(FlaskForm):
    titulo = StringField('Produto', validators=[DataRequired(), Length(max=200)], filters=[strip_filter])
    preco_compra = DecimalField('Preço de compra (€)', places=2, validators=[DataRequired(), valor_finito, NumberRange(min=0)])
    data_compra = DateField('Data de compra', validators=[DataRequired()])
    categoria_escolha = SelectField('Categoria', coerce=str, validators=[DataRequired()])
    nova_categoria = StringField('Nova categoria', validators=[Length(max=100)], filters=[strip_filter])
    submit = SubmitField('Guardar')

    def validate_nova_categoria(self, field):
        if self.categoria_escolha.data == NOVA and not field.data:
            raise ValidationError('Nome da nova categoria é obrigatório')

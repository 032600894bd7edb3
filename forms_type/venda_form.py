# Formulário para marcar um item como vendido
from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, DateField, SelectField, SubmitField
from wtforms.validators import DataRequired, NumberRange, Length, ValidationError

from .cadastro_item_form import NOVA, strip_filter, valor_finito


class VendaForm(FlaskForm):
    preco_venda = DecimalField('Preço de venda (€)', places=2, validators=[DataRequired(), valor_finito, NumberRange(min=0)])
    data_venda = DateField('Data de venda', validators=[DataRequired()])
    plataforma_escolha = SelectField('Plataforma', coerce=str, validators=[DataRequired()])
    nova_plataforma = StringField('Nova plataforma', validators=[Length(max=100)], filters=[strip_filter])
    submit = SubmitField('Marcar vendido')

    def validate_nova_plataforma(self, field):
        if self.plataforma_escolha.data == NOVA and not field.data:
            raise ValidationError('Nome da nova plataforma é obrigatório')

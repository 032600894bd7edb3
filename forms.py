# Formulários principais do sistema (conta de usuário)
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Email, EqualTo, Length

# Formulários específicos de itens e login
from forms_type import CadastroItemForm, EditarItemForm, LoginForm, VendaForm, NOVA

class CadastroUsuarioForm(FlaskForm):
    """Formulário para criação de conta"""
    email = StringField('E-mail', validators=[DataRequired(), Email(), Length(max=150)])  # E-mail válido
    senha = PasswordField('Senha', validators=[DataRequired(), Length(min=6)])  # Senha (mínimo 6 caracteres)
    confirmar_senha = PasswordField('Confirmar Senha', validators=[DataRequired(), EqualTo('senha', message='As senhas devem coincidir.')])  # Confirmação
    submit = SubmitField('Criar conta')  # Botão de envio

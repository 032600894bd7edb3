# Formulário de entrada na conta
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Email, Length

class LoginForm(FlaskForm):
    email = StringField('E-mail', validators=[DataRequired(), Email(), Length(max=150)])  # Normalizado na view
    senha = PasswordField('Senha', validators=[DataRequired()])
    lembrar = BooleanField('Manter sessão iniciada')  # Cookie "remember me" do Flask-Login
    submit = SubmitField('Entrar')

# Formulários das telas de inventário
from .login_form import LoginForm
from .cadastro_item_form import CadastroItemForm, NOVA
from .venda_form import VendaForm
from .editar_item_form import EditarItemForm

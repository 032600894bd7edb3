from datetime import date
from urllib.parse import urlparse

from flask import Flask, render_template, redirect, url_for, flash, request
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from flask_wtf.csrf import CSRFProtect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from config import Config
from forms import CadastroUsuarioForm, CadastroItemForm, EditarItemForm, LoginForm, VendaForm, NOVA
from logger import configurar_logging, log_event, log_error, log_warning
from models import db, Usuario, Item, Categoria, Plataforma, EM_STOCK, VENDIDO, STATUS_VALIDOS
import relatorios

app = Flask(__name__)
app.config.from_object(Config)

db.init_app(app)
csrf = CSRFProtect(app)
configurar_logging(app)

login_manager = LoginManager()
login_manager.init_app(app)
login_manager.login_view = 'login'
login_manager.login_message = 'Faça login para continuar.'
login_manager.login_message_category = 'warning'

# Rotas de autenticação: usuário já logado é mandado para o dashboard
ROTAS_AUTH = {'login', 'registrar'}


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(Usuario, int(user_id))


@app.before_request
def redirecionar_usuario_logado():
    if request.endpoint in ROTAS_AUTH and current_user.is_authenticated:
        return redirect(url_for('dashboard'))


@app.template_filter('eur')
def filtro_eur(valor):
    return relatorios.formatar_eur(valor, app.config['MOEDA'])


@app.template_filter('percentual')
def filtro_percentual(razao):
    return relatorios.formatar_percentual(razao)


@app.template_filter('dias')
def filtro_dias(dias):
    return relatorios.formatar_dias(dias)


@app.template_filter('rotulo_mes')
def filtro_rotulo_mes(yyyymm):
    return relatorios.rotulo_mes(yyyymm)


@app.errorhandler(404)
def nao_encontrado(e):
    mensagem = 'Item não encontrado.' if request.endpoint else 'Página não encontrada.'
    return render_template('erro.html', mensagem=mensagem), 404


@app.errorhandler(SQLAlchemyError)
def erro_banco(e):
    """Falha de leitura nas páginas: mostra a mensagem do banco quase sem tratamento."""
    db.session.rollback()
    log_error(f'Erro de banco em {request.path}', e)
    return render_template('erro.html', mensagem=f'Erro: {mensagem_banco(e)}'), 500


def mensagem_banco(exc):
    orig = getattr(exc, 'orig', None)
    return str(orig) if orig is not None else str(exc)


def falha_ao_gravar(acao, exc):
    """Desfaz a transação, registra o erro e devolve a mensagem do banco ao usuário."""
    db.session.rollback()
    log_error(f'Erro ao {acao} (usuario={current_user.id})', exc)
    flash(f'Erro: {mensagem_banco(exc)}', 'danger')


def url_segura(destino):
    """Aceita apenas caminhos locais no parâmetro `next`."""
    if not destino:
        return None
    partes = urlparse(destino)
    if partes.scheme or partes.netloc or not destino.startswith('/'):
        return None
    return destino


# ---------------------------
# Consultas sempre filtradas pelo usuário logado
# ---------------------------

def itens_do_usuario():
    return Item.query.filter(Item.usuario_id == current_user.id)


def item_do_usuario_or_404(item_id):
    return itens_do_usuario().filter(Item.id == item_id).first_or_404()


def categorias_do_usuario():
    return Categoria.query.filter_by(usuario_id=current_user.id).order_by(Categoria.nome).all()


def plataformas_do_usuario():
    return Plataforma.query.filter_by(usuario_id=current_user.id).order_by(Plataforma.nome).all()


def vendidos_entre(inicio=None, fim=None):
    query = (
        itens_do_usuario()
        .options(joinedload(Item.plataforma), joinedload(Item.categoria))
        .filter(Item.status == VENDIDO)
    )
    if inicio is not None:
        query = query.filter(Item.data_venda >= inicio, Item.data_venda < fim)
    return query.order_by(Item.data_venda.desc()).all()


def comprados_entre(inicio=None, fim=None):
    query = itens_do_usuario()
    if inicio is not None:
        query = query.filter(Item.data_compra >= inicio, Item.data_compra < fim)
    return query.order_by(Item.data_compra.desc()).all()


def itens_em_stock():
    # Capital preso é sempre o estado atual, independente do período/filtros
    return itens_do_usuario().filter(Item.status == EM_STOCK).all()


def obter_ou_criar(modelo, nome):
    """Upsert por (usuario_id, nome): reaproveita a categoria/plataforma se o nome já existe."""
    existente = modelo.query.filter_by(usuario_id=current_user.id, nome=nome).first()
    if existente is None:
        existente = modelo(usuario_id=current_user.id, nome=nome)
        db.session.add(existente)
        db.session.flush()
        log_event(f'{modelo.__name__} criada: {nome} (usuario={current_user.id})')
    return existente


# ---------------------------
# Sessão
# ---------------------------

@app.route('/')
def index():
    return redirect(url_for('dashboard'))


@app.route('/login', methods=['GET', 'POST'])
def login():
    form = LoginForm()
    if form.validate_on_submit():
        usuario = Usuario.query.filter_by(email=form.email.data.strip().lower()).first()
        if usuario and usuario.check_password(form.senha.data):
            login_user(usuario, remember=form.lembrar.data)
            log_event(f'Login: {usuario.email}')
            return redirect(url_segura(request.args.get('next')) or url_for('dashboard'))
        log_warning(f'Login recusado para {form.email.data}')
        flash('E-mail ou senha incorretos.', 'danger')
    return render_template('login.html', form=form)


@app.route('/registrar', methods=['GET', 'POST'])
def registrar():
    form = CadastroUsuarioForm()
    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        if Usuario.query.filter_by(email=email).first():
            flash('Este e-mail já está cadastrado.', 'danger')
            return render_template('registrar.html', form=form)
        usuario = Usuario(email=email)
        usuario.set_password(form.senha.data)
        try:
            db.session.add(usuario)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            log_error(f'Erro ao criar conta {email}', e)
            flash(f'Erro: {mensagem_banco(e)}', 'danger')
            return render_template('registrar.html', form=form)
        log_event(f'Conta criada: {email} (id={usuario.id})')
        login_user(usuario)
        flash('Conta criada com sucesso!', 'success')
        return redirect(url_for('dashboard'))
    return render_template('registrar.html', form=form)


@app.route('/logout', methods=['POST'])
@login_required
def logout():
    log_event(f'Logout: {current_user.email}')
    logout_user()
    flash('Você saiu do sistema.', 'success')
    return redirect(url_for('login'))


# ---------------------------
# Dashboards
# ---------------------------

@app.route('/dashboard')
@login_required
def dashboard():
    hoje = date.today()
    mes = relatorios.parse_mes(request.args.get('mes'), hoje)
    inicio, fim = relatorios.intervalo_mes(mes)

    compras = comprados_entre(inicio, fim)
    vendidos = vendidos_entre(inicio, fim)
    resumo = relatorios.resumo_periodo(compras, vendidos, itens_em_stock())
    vendas_plataforma = relatorios.barras(relatorios.contar_por_plataforma(vendidos))

    return render_template('dashboard.html',
        mes=mes,
        inicio=inicio,
        fim=fim,
        meses=relatorios.meses_recentes(hoje, app.config['MESES_SELETOR']),
        compras=compras,
        vendidos=vendidos,
        resumo=resumo,
        vendas_plataforma=vendas_plataforma,
    )


@app.route('/dashboard/anual')
@login_required
def dashboard_anual():
    hoje = date.today()
    ano = relatorios.parse_ano(request.args.get('ano'), hoje)
    inicio, fim = relatorios.intervalo_ano(ano)

    compras = comprados_entre(inicio, fim)
    vendidos = vendidos_entre(inicio, fim)
    resumo = relatorios.resumo_periodo(compras, vendidos, itens_em_stock())

    return render_template('dashboard_anual.html',
        ano=ano,
        inicio=inicio,
        fim=fim,
        anos=relatorios.anos_recentes(hoje, app.config['ANOS_SELETOR']),
        resumo=resumo,
        vendas_plataforma=relatorios.barras(relatorios.contar_por_plataforma(vendidos)),
        top_vendidos=relatorios.top_por_lucro(vendidos, app.config['TOP_N']),
        lucro_mensal=relatorios.barras(relatorios.lucro_por_mes_do_ano(vendidos, ano)),
        lucro_categoria=relatorios.lucro_por_categoria(vendidos),
        top_n=app.config['TOP_N'],
    )


@app.route('/dashboard/total')
@login_required
def dashboard_total():
    todos = comprados_entre()
    vendidos = vendidos_entre()
    resumo = relatorios.resumo_periodo(todos, vendidos, itens_em_stock())

    custo_vendidos = relatorios.somar(vendidos, 'preco_compra')
    curva = relatorios.lucro_acumulado_por_mes(vendidos)
    acumulados = [acumulado for _, _, acumulado in curva]

    return render_template('dashboard_total.html',
        resumo=resumo,
        margem=relatorios.margem_lucro(resumo['lucro'], resumo['total_vendas']),
        roi=relatorios.roi(resumo['lucro'], custo_vendidos),
        escoamento=relatorios.taxa_escoamento(len(vendidos), len(todos)),
        qtd_vendidos=len(vendidos),
        qtd_total=len(todos),
        vendas_plataforma=relatorios.barras(relatorios.contar_por_plataforma(vendidos)),
        top_vendidos=relatorios.top_por_lucro(vendidos, app.config['TOP_N']),
        lucro_categoria=relatorios.lucro_por_categoria(vendidos),
        curva=curva,
        curva_pontos=relatorios.pontos_svg(acumulados),
        curva_zero=relatorios.y_zero_svg(acumulados),
        top_n=app.config['TOP_N'],
    )


# ---------------------------
# Inventário
# ---------------------------

@app.route('/items')
@login_required
def listar_itens():
    status = request.args.get('status')
    if status not in STATUS_VALIDOS:
        status = 'ALL'
    categoria_id = request.args.get('categoria', type=int)
    atributo, direcao, ordenacao = relatorios.parse_ordenacao(request.args.get('sort'))

    query = itens_do_usuario().options(joinedload(Item.categoria), joinedload(Item.plataforma))
    if status != 'ALL':
        query = query.filter(Item.status == status)
    if categoria_id:
        query = query.filter(Item.categoria_id == categoria_id)
    itens = relatorios.ordenar_itens(query.all(), atributo, direcao)

    return render_template('items.html',
        itens=itens,
        categorias=categorias_do_usuario(),
        status=status,
        categoria_id=categoria_id,
        ordenacao=ordenacao,
        capital_preso=relatorios.somar(itens_em_stock(), 'preco_compra'),
    )


@app.route('/items/novo', methods=['GET', 'POST'])
@login_required
def novo_item():
    categorias = categorias_do_usuario()
    form = CadastroItemForm()
    form.categoria_escolha.choices = [(str(c.id), c.nome) for c in categorias] + [(NOVA, '+ Nova categoria')]
    if request.method == 'GET':
        form.data_compra.data = date.today()
        if not categorias:
            form.categoria_escolha.data = NOVA

    if form.validate_on_submit():
        try:
            if form.categoria_escolha.data == NOVA:
                categoria = obter_ou_criar(Categoria, form.nova_categoria.data)
            else:
                categoria = next(c for c in categorias if str(c.id) == form.categoria_escolha.data)
            item = Item(
                usuario_id=current_user.id,
                titulo=form.titulo.data,
                preco_compra=float(form.preco_compra.data),
                data_compra=form.data_compra.data,
                categoria_id=categoria.id,
                status=EM_STOCK,
            )
            db.session.add(item)
            db.session.commit()
        except SQLAlchemyError as e:
            falha_ao_gravar('cadastrar item', e)
            return render_template('novo_item.html', form=form)
        log_event(f'Compra registrada: {item.titulo} por {item.preco_compra:.2f} (item={item.id}, usuario={current_user.id})')
        flash('Compra registrada com sucesso!', 'success')
        return redirect(url_for('listar_itens'))
    return render_template('novo_item.html', form=form)


@app.route('/items/<int:item_id>/vender', methods=['GET', 'POST'])
@login_required
def vender_item(item_id):
    item = item_do_usuario_or_404(item_id)
    if item.vendido:
        flash('Este item já está marcado como vendido.', 'warning')
        return redirect(url_for('listar_itens'))

    plataformas = plataformas_do_usuario()
    form = VendaForm()
    form.plataforma_escolha.choices = [(str(p.id), p.nome) for p in plataformas] + [(NOVA, '+ Nova plataforma')]
    if request.method == 'GET':
        form.data_venda.data = date.today()
        if not plataformas:
            form.plataforma_escolha.data = NOVA

    if form.validate_on_submit():
        try:
            if form.plataforma_escolha.data == NOVA:
                plataforma = obter_ou_criar(Plataforma, form.nova_plataforma.data)
            else:
                plataforma = next(p for p in plataformas if str(p.id) == form.plataforma_escolha.data)
            item.marcar_vendido(float(form.preco_venda.data), form.data_venda.data, plataforma.id)
            db.session.commit()
        except SQLAlchemyError as e:
            falha_ao_gravar(f'vender item {item_id}', e)
            return redirect(url_for('vender_item', item_id=item_id))
        log_event(f'Venda registrada: item={item.id} por {item.preco_venda:.2f} em {plataforma.nome} (usuario={current_user.id})')
        flash('Item marcado como vendido!', 'success')
        return redirect(url_for('listar_itens'))
    return render_template('vender_item.html', form=form, item=item)


@app.route('/items/<int:item_id>/editar', methods=['GET', 'POST'])
@login_required
def editar_item(item_id):
    item = item_do_usuario_or_404(item_id)
    form = EditarItemForm(obj=item)
    form.vendido = item.vendido
    form.categoria_id.choices = [(c.id, c.nome) for c in categorias_do_usuario()]
    form.plataforma_id.choices = [('', 'Selecionar plataforma')] + [(p.id, p.nome) for p in plataformas_do_usuario()]

    if form.validate_on_submit():
        try:
            item.titulo = form.titulo.data
            item.notas = form.notas.data
            item.preco_compra = float(form.preco_compra.data)
            item.data_compra = form.data_compra.data
            item.categoria_id = form.categoria_id.data
            # O status não muda aqui: vender/desmarcar têm fluxo próprio
            if item.vendido:
                item.marcar_vendido(float(form.preco_venda.data), form.data_venda.data, form.plataforma_id.data)
            else:
                item.desmarcar_venda()
            db.session.commit()
        except SQLAlchemyError as e:
            falha_ao_gravar(f'editar item {item_id}', e)
            return redirect(url_for('editar_item', item_id=item_id))
        log_event(f'Item editado: {item.titulo} (item={item.id}, usuario={current_user.id})')
        flash('Item atualizado com sucesso!', 'success')
        return redirect(url_for('listar_itens'))
    return render_template('editar_item.html', form=form, item=item)


@app.route('/items/<int:item_id>/desmarcar', methods=['POST'])
@login_required
def desmarcar_venda(item_id):
    item = item_do_usuario_or_404(item_id)
    try:
        item.desmarcar_venda()
        db.session.commit()
    except SQLAlchemyError as e:
        falha_ao_gravar(f'desmarcar venda do item {item_id}', e)
        return redirect(url_for('editar_item', item_id=item_id))
    log_event(f'Venda desmarcada: item={item_id} (usuario={current_user.id})')
    flash('Venda desmarcada. O item voltou para EM_STOCK.', 'success')
    return redirect(url_for('listar_itens'))


@app.route('/items/<int:item_id>/apagar', methods=['POST'])
@login_required
def apagar_item(item_id):
    item = item_do_usuario_or_404(item_id)
    titulo = item.titulo
    try:
        db.session.delete(item)
        db.session.commit()
    except SQLAlchemyError as e:
        falha_ao_gravar(f'apagar item {item_id}', e)
        return redirect(url_for('editar_item', item_id=item_id))
    log_event(f'Item apagado: {titulo} (item={item_id}, usuario={current_user.id})')
    flash('Item apagado.', 'success')
    return redirect(url_for('listar_itens'))


@app.cli.command('init-db')
def init_db():
    """Cria as tabelas no banco configurado em DATABASE_URL."""
    db.create_all()
    log_event(f"Tabelas criadas em {app.config['SQLALCHEMY_DATABASE_URI']}")


if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    app.run(debug=True)

"""Cálculos dos dashboards e do inventário.

Funções puras sobre listas de itens já filtradas pela consulta ao banco:
somas, médias, agrupamentos (plataforma, categoria, mês), top-N e a geometria
simples dos gráficos (barras em % e polyline SVG). Cada função faz uma única
passagem sobre os itens.
"""
import re
from datetime import date

SEM_PLATAFORMA = 'Sem plataforma'
SEM_CATEGORIA = 'Sem categoria'

MESES_PT = [
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
]
MESES_ABREV = ['Jan', 'Fev', 'Mar', 'Abr', 'Mai', 'Jun', 'Jul', 'Ago', 'Set', 'Out', 'Nov', 'Dez']

_RE_MES = re.compile(r'^\d{4}-\d{2}$')
_RE_ANO = re.compile(r'^\d{4}$')
ANO_MAX = date.max.year - 1

# Opções de ordenação do inventário: valor do parâmetro -> (atributo do item, direção)
ORDENACOES = {
    'purchase_date_desc': ('data_compra', 'desc'),
    'purchase_date_asc': ('data_compra', 'asc'),
    'purchase_price_desc': ('preco_compra', 'desc'),
    'purchase_price_asc': ('preco_compra', 'asc'),
    'profit_desc': ('lucro', 'desc'),
    'profit_asc': ('lucro', 'asc'),
    'hold_days_desc': ('dias_hold', 'desc'),
    'hold_days_asc': ('dias_hold', 'asc'),
}
ORDENACAO_PADRAO = 'purchase_date_desc'


# ---------------------------
# Períodos
# ---------------------------

def mes_atual(hoje):
    return f'{hoje.year:04d}-{hoje.month:02d}'


def _ano_valido(ano):
    # O ano seguinte também precisa caber em `date` (fim do intervalo)
    return 1 <= ano <= ANO_MAX


def parse_mes(valor, hoje):
    """Devolve 'YYYY-MM' válido; qualquer outra coisa cai no mês de `hoje`."""
    if valor and _RE_MES.match(valor):
        ano, mes = int(valor[:4]), int(valor[5:7])
        if _ano_valido(ano) and 1 <= mes <= 12:
            return valor
    return mes_atual(hoje)


def parse_ano(valor, hoje):
    if valor and _RE_ANO.match(valor) and _ano_valido(int(valor)):
        return int(valor)
    return hoje.year


def intervalo_mes(yyyymm):
    """Intervalo [primeiro dia do mês, primeiro dia do mês seguinte)."""
    ano, mes = int(yyyymm[:4]), int(yyyymm[5:7])
    inicio = date(ano, mes, 1)
    fim = date(ano + 1, 1, 1) if mes == 12 else date(ano, mes + 1, 1)
    return inicio, fim


def intervalo_ano(ano):
    return date(ano, 1, 1), date(ano + 1, 1, 1)


def meses_recentes(hoje, quantidade=12):
    """Últimos `quantidade` meses em 'YYYY-MM', do atual para trás."""
    meses = []
    ano, mes = hoje.year, hoje.month
    for _ in range(quantidade):
        meses.append(f'{ano:04d}-{mes:02d}')
        mes -= 1
        if mes == 0:
            mes = 12
            ano -= 1
    return meses


def anos_recentes(hoje, quantidade=5):
    return [hoje.year - i for i in range(quantidade)]


def rotulo_mes(yyyymm):
    """'2025-03' -> 'março de 2025'"""
    ano, mes = int(yyyymm[:4]), int(yyyymm[5:7])
    return f'{MESES_PT[mes - 1]} de {ano}'


def chave_mes(data):
    return f'{data.year:04d}-{data.month:02d}'


# ---------------------------
# Totais
# ---------------------------

def somar(itens, atributo):
    """Soma um atributo numérico; valores None contam como zero."""
    total = 0.0
    for item in itens:
        valor = getattr(item, atributo)
        if valor is not None:
            total += float(valor)
    return total


def hold_medio(vendidos):
    """Média de dias de hold; None se não houver vendas."""
    total = 0
    quantidade = 0
    for item in vendidos:
        total += item.dias_hold or 0
        quantidade += 1
    if quantidade == 0:
        return None
    return total / quantidade


def resumo_periodo(compras, vendidos, em_stock):
    """KPIs comuns aos três dashboards."""
    return {
        'total_compras': somar(compras, 'preco_compra'),
        'total_vendas': somar(vendidos, 'preco_venda'),
        'lucro': somar(vendidos, 'lucro'),
        'capital_preso': somar(em_stock, 'preco_compra'),
        'hold_medio': hold_medio(vendidos),
    }


def _razao(numerador, denominador):
    if not denominador:
        return None
    return numerador / denominador


def margem_lucro(lucro, total_vendas):
    """Lucro / vendas."""
    return _razao(lucro, total_vendas)


def roi(lucro, custo_vendidos):
    """Lucro / custo dos itens vendidos."""
    return _razao(lucro, custo_vendidos)


def taxa_escoamento(qtd_vendidos, qtd_total):
    """Sell-through: itens vendidos / itens comprados."""
    return _razao(qtd_vendidos, qtd_total)


# ---------------------------
# Agrupamentos
# ---------------------------

def _nome_ou(relacionado, padrao):
    nome = getattr(relacionado, 'nome', None) if relacionado is not None else None
    return nome or padrao


def contar_por_plataforma(vendidos):
    """[(plataforma, nº de vendas)] em ordem decrescente."""
    contagem = {}
    for item in vendidos:
        nome = _nome_ou(item.plataforma, SEM_PLATAFORMA)
        contagem[nome] = contagem.get(nome, 0) + 1
    return sorted(contagem.items(), key=lambda par: par[1], reverse=True)


def lucro_por_categoria(vendidos):
    """Lucro por categoria com quantidade e lucro médio, do maior lucro para o menor."""
    grupos = {}
    for item in vendidos:
        nome = _nome_ou(item.categoria, SEM_CATEGORIA)
        grupo = grupos.setdefault(nome, {'nome': nome, 'quantidade': 0, 'lucro': 0.0})
        grupo['quantidade'] += 1
        grupo['lucro'] += item.lucro or 0.0
    resultado = []
    for grupo in grupos.values():
        grupo['lucro_medio'] = grupo['lucro'] / grupo['quantidade']
        resultado.append(grupo)
    resultado.sort(key=lambda g: g['lucro'], reverse=True)
    return resultado


def lucro_por_mes_do_ano(vendidos, ano):
    """12 posições (Jan..Dez) com o lucro das vendas de cada mês de `ano`."""
    lucros = [0.0] * 12
    for item in vendidos:
        if item.data_venda is None or item.data_venda.year != ano:
            continue
        lucros[item.data_venda.month - 1] += item.lucro or 0.0
    return list(zip(MESES_ABREV, lucros))


def lucro_acumulado_por_mes(vendidos):
    """Curva de lucro acumulado: [(YYYY-MM, lucro do mês, acumulado)].

    Vai do primeiro ao último mês com venda; meses sem vendas entram com zero.
    """
    por_mes = {}
    for item in vendidos:
        if item.data_venda is None:
            continue
        chave = chave_mes(item.data_venda)
        por_mes[chave] = por_mes.get(chave, 0.0) + (item.lucro or 0.0)
    if not por_mes:
        return []

    primeiro, ultimo = min(por_mes), max(por_mes)
    ano, mes = int(primeiro[:4]), int(primeiro[5:7])
    curva = []
    acumulado = 0.0
    while True:
        chave = f'{ano:04d}-{mes:02d}'
        lucro_mes = por_mes.get(chave, 0.0)
        acumulado += lucro_mes
        curva.append((chave, lucro_mes, acumulado))
        if chave == ultimo:
            break
        mes += 1
        if mes == 13:
            mes = 1
            ano += 1
    return curva


def top_por_lucro(vendidos, n=10):
    """Os `n` itens de maior lucro, em ordem decrescente."""
    return sorted(vendidos, key=lambda item: item.lucro or 0.0, reverse=True)[:n]


# ---------------------------
# Gráficos
# ---------------------------

def barras(pares):
    """[(rótulo, valor)] -> barras com largura em % do maior valor absoluto."""
    maximo = max((abs(valor) for _, valor in pares), default=0)
    resultado = []
    for rotulo, valor in pares:
        largura = 0.0 if maximo == 0 else abs(valor) / maximo * 100
        resultado.append({'rotulo': rotulo, 'valor': valor, 'largura': largura, 'negativo': valor < 0})
    return resultado


def pontos_svg(valores, largura=600, altura=160, margem=10):
    """Coordenadas "x,y x,y ..." de uma polyline para os valores dados.

    O eixo vertical sempre inclui o zero; y cresce para baixo como no SVG.
    """
    if not valores:
        return ''
    minimo = min(0.0, min(valores))
    maximo = max(0.0, max(valores))
    amplitude = (maximo - minimo) or 1.0
    util_x = largura - 2 * margem
    util_y = altura - 2 * margem
    passo = util_x / (len(valores) - 1) if len(valores) > 1 else 0
    pontos = []
    for i, valor in enumerate(valores):
        x = margem + i * passo
        y = margem + (maximo - valor) / amplitude * util_y
        pontos.append(f'{x:.1f},{y:.1f}')
    return ' '.join(pontos)


def y_zero_svg(valores, altura=160, margem=10):
    """Posição y da linha do zero, na mesma escala de pontos_svg."""
    if not valores:
        return altura - margem
    minimo = min(0.0, min(valores))
    maximo = max(0.0, max(valores))
    amplitude = (maximo - minimo) or 1.0
    return margem + maximo / amplitude * (altura - 2 * margem)


# ---------------------------
# Inventário
# ---------------------------

def parse_ordenacao(opcao):
    """Devolve (atributo, direção, opção); opção desconhecida usa a padrão."""
    if opcao not in ORDENACOES:
        opcao = ORDENACAO_PADRAO
    atributo, direcao = ORDENACOES[opcao]
    return atributo, direcao, opcao


def ordenar_itens(itens, atributo, direcao):
    """Ordena pelo atributo; itens sem valor (ex.: lucro de item em stock) vão para o fim."""
    com_valor = [i for i in itens if getattr(i, atributo) is not None]
    sem_valor = [i for i in itens if getattr(i, atributo) is None]
    com_valor.sort(key=lambda i: getattr(i, atributo), reverse=(direcao == 'desc'))
    return com_valor + sem_valor


# ---------------------------
# Formatação
# ---------------------------

def formatar_eur(valor, moeda='€'):
    numero = float(valor or 0)
    return f'{moeda} {numero:.2f}'


def formatar_percentual(razao):
    if razao is None:
        return '—'
    return f'{razao * 100:.1f}%'


def formatar_dias(dias):
    if dias is None:
        return '—'
    return f'{dias:.1f} dias'

import unittest
from datetime import date
from types import SimpleNamespace

import relatorios


def item(lucro=None, dias_hold=0, plataforma=None, categoria=None, data_venda=None,
         preco_compra=0.0, preco_venda=None, titulo='x'):
    return SimpleNamespace(
        titulo=titulo,
        lucro=lucro,
        dias_hold=dias_hold,
        plataforma=SimpleNamespace(nome=plataforma) if plataforma else None,
        categoria=SimpleNamespace(nome=categoria) if categoria else None,
        data_venda=data_venda,
        preco_compra=preco_compra,
        preco_venda=preco_venda,
    )


class TestPeriodos(unittest.TestCase):

    def test_parse_mes_aceita_yyyy_mm(self):
        self.assertEqual(relatorios.parse_mes('2025-03', date(2026, 1, 5)), '2025-03')

    def test_parse_mes_invalido_usa_mes_atual(self):
        hoje = date(2026, 1, 5)
        for valor in (None, '', 'abc', '2025-13', '2025-00', '2025-3', '0000-05', '9999-12'):
            self.assertEqual(relatorios.parse_mes(valor, hoje), '2026-01')

    def test_parse_ano(self):
        hoje = date(2026, 1, 5)
        self.assertEqual(relatorios.parse_ano('2024', hoje), 2024)
        self.assertEqual(relatorios.parse_ano('24', hoje), 2026)
        self.assertEqual(relatorios.parse_ano(None, hoje), 2026)
        self.assertEqual(relatorios.parse_ano('0000', hoje), 2026)
        self.assertEqual(relatorios.parse_ano('9999', hoje), 2026)
        self.assertEqual(relatorios.parse_ano('9998', hoje), 9998)
        self.assertEqual(relatorios.parse_ano('0001', hoje), 1)

    def test_intervalo_mes_vira_o_ano_em_dezembro(self):
        self.assertEqual(relatorios.intervalo_mes('2025-12'), (date(2025, 12, 1), date(2026, 1, 1)))
        self.assertEqual(relatorios.intervalo_mes('2025-02'), (date(2025, 2, 1), date(2025, 3, 1)))
        self.assertEqual(relatorios.intervalo_mes('9998-12'), (date(9998, 12, 1), date(9999, 1, 1)))

    def test_intervalo_ano(self):
        self.assertEqual(relatorios.intervalo_ano(2024), (date(2024, 1, 1), date(2025, 1, 1)))

    def test_meses_recentes_do_atual_para_tras(self):
        self.assertEqual(
            relatorios.meses_recentes(date(2025, 2, 10), 3),
            ['2025-02', '2025-01', '2024-12'],
        )
        self.assertEqual(len(relatorios.meses_recentes(date(2025, 2, 10))), 12)

    def test_anos_recentes(self):
        self.assertEqual(relatorios.anos_recentes(date(2025, 6, 1), 3), [2025, 2024, 2023])

    def test_rotulo_mes_em_portugues(self):
        self.assertEqual(relatorios.rotulo_mes('2025-03'), 'março de 2025')
        self.assertEqual(relatorios.rotulo_mes('2024-12'), 'dezembro de 2024')


class TestTotais(unittest.TestCase):

    def test_somar_ignora_none(self):
        itens = [item(preco_venda=10.0), item(preco_venda=None), item(preco_venda=2.5)]
        self.assertEqual(relatorios.somar(itens, 'preco_venda'), 12.5)

    def test_soma_das_compras_bate_com_o_total_do_resumo(self):
        compras = [item(preco_compra=p) for p in (40.0, 60.0, 19.99)]
        resumo = relatorios.resumo_periodo(compras, [], [])
        self.assertAlmostEqual(resumo['total_compras'], sum(c.preco_compra for c in compras))
        self.assertIsNone(resumo['hold_medio'])

    def test_hold_medio(self):
        self.assertIsNone(relatorios.hold_medio([]))
        self.assertEqual(relatorios.hold_medio([item(dias_hold=10), item(dias_hold=32)]), 21)

    def test_resumo_periodo(self):
        compras = [item(preco_compra=40.0), item(preco_compra=60.0)]
        vendidos = [
            item(preco_compra=60.0, preco_venda=100.0, lucro=40.0, dias_hold=10),
            item(preco_compra=20.0, preco_venda=50.0, lucro=30.0, dias_hold=32),
        ]
        em_stock = [item(preco_compra=40.0), item(preco_compra=15.0)]
        resumo = relatorios.resumo_periodo(compras, vendidos, em_stock)
        self.assertEqual(resumo, {
            'total_compras': 100.0,
            'total_vendas': 150.0,
            'lucro': 70.0,
            'capital_preso': 55.0,
            'hold_medio': 21.0,
        })

    def test_razoes_com_denominador_zero(self):
        self.assertIsNone(relatorios.margem_lucro(10.0, 0))
        self.assertIsNone(relatorios.roi(10.0, 0.0))
        self.assertIsNone(relatorios.taxa_escoamento(0, 0))

    def test_razoes(self):
        self.assertAlmostEqual(relatorios.margem_lucro(70.0, 150.0), 70 / 150)
        self.assertAlmostEqual(relatorios.roi(70.0, 80.0), 0.875)
        self.assertEqual(relatorios.taxa_escoamento(2, 4), 0.5)


class TestAgrupamentos(unittest.TestCase):

    def test_contar_por_plataforma_ordena_desc(self):
        vendidos = [item(plataforma='Vinted'), item(plataforma='OLX'), item(plataforma='Vinted'), item()]
        self.assertEqual(
            relatorios.contar_por_plataforma(vendidos),
            [('Vinted', 2), ('OLX', 1), ('Sem plataforma', 1)],
        )

    def test_lucro_por_categoria(self):
        vendidos = [
            item(categoria='Ténis', lucro=30.0),
            item(categoria='Casacos', lucro=50.0),
            item(categoria='Ténis', lucro=10.0),
            item(lucro=-5.0),
        ]
        grupos = relatorios.lucro_por_categoria(vendidos)
        self.assertEqual([g['nome'] for g in grupos], ['Casacos', 'Ténis', 'Sem categoria'])
        tenis = grupos[1]
        self.assertEqual(tenis['quantidade'], 2)
        self.assertEqual(tenis['lucro'], 40.0)
        self.assertEqual(tenis['lucro_medio'], 20.0)

    def test_lucro_por_mes_do_ano_tem_doze_posicoes(self):
        vendidos = [
            item(lucro=10.0, data_venda=date(2025, 1, 15)),
            item(lucro=5.0, data_venda=date(2025, 1, 20)),
            item(lucro=7.0, data_venda=date(2025, 12, 1)),
            item(lucro=99.0, data_venda=date(2024, 1, 1)),
        ]
        meses = relatorios.lucro_por_mes_do_ano(vendidos, 2025)
        self.assertEqual(len(meses), 12)
        self.assertEqual(meses[0], ('Jan', 15.0))
        self.assertEqual(meses[11], ('Dez', 7.0))
        self.assertEqual(sum(v for _, v in meses), 22.0)

    def test_lucro_acumulado_preenche_meses_sem_venda(self):
        vendidos = [
            item(lucro=5.0, data_venda=date(2025, 1, 3)),
            item(lucro=10.0, data_venda=date(2024, 11, 20)),
            item(lucro=-2.0, data_venda=date(2025, 1, 30)),
        ]
        self.assertEqual(
            relatorios.lucro_acumulado_por_mes(vendidos),
            [('2024-11', 10.0, 10.0), ('2024-12', 0.0, 10.0), ('2025-01', 3.0, 13.0)],
        )

    def test_lucro_acumulado_vazio(self):
        self.assertEqual(relatorios.lucro_acumulado_por_mes([]), [])

    def test_top_por_lucro_ordena_desc_e_limita(self):
        vendidos = [item(lucro=float(i), titulo=str(i)) for i in range(12)]
        top = relatorios.top_por_lucro(vendidos, 10)
        self.assertEqual(len(top), 10)
        lucros = [t.lucro for t in top]
        self.assertEqual(lucros, sorted(lucros, reverse=True))
        self.assertEqual(lucros[0], 11.0)

    def test_top_com_menos_itens_que_n(self):
        self.assertEqual(len(relatorios.top_por_lucro([item(lucro=1.0)], 10)), 1)


class TestGraficos(unittest.TestCase):

    def test_barras_proporcionais_ao_maximo(self):
        resultado = relatorios.barras([('a', 5), ('b', 10), ('c', 0)])
        self.assertEqual([b['largura'] for b in resultado], [50.0, 100.0, 0.0])

    def test_barras_negativas(self):
        resultado = relatorios.barras([('Jan', -20.0), ('Fev', 40.0)])
        self.assertTrue(resultado[0]['negativo'])
        self.assertEqual(resultado[0]['largura'], 50.0)

    def test_barras_vazias_ou_zeradas(self):
        self.assertEqual(relatorios.barras([]), [])
        self.assertEqual(relatorios.barras([('a', 0)])[0]['largura'], 0.0)

    def test_pontos_svg(self):
        self.assertEqual(relatorios.pontos_svg([0.0, 10.0]), '10.0,150.0 590.0,10.0')
        self.assertEqual(relatorios.pontos_svg([5.0]), '10.0,10.0')
        self.assertEqual(relatorios.pontos_svg([]), '')

    def test_y_zero_svg(self):
        self.assertEqual(relatorios.y_zero_svg([0.0, 10.0]), 150.0)
        self.assertEqual(relatorios.y_zero_svg([-10.0, 10.0]), 80.0)


class TestInventario(unittest.TestCase):

    def test_parse_ordenacao(self):
        self.assertEqual(relatorios.parse_ordenacao('profit_asc'), ('lucro', 'asc', 'profit_asc'))
        self.assertEqual(
            relatorios.parse_ordenacao('qualquer'),
            ('data_compra', 'desc', 'purchase_date_desc'),
        )
        self.assertEqual(relatorios.parse_ordenacao(None)[2], 'purchase_date_desc')

    def test_ordenar_itens_deixa_sem_valor_no_fim(self):
        itens = [item(lucro=None, titulo='a'), item(lucro=5.0, titulo='b'), item(lucro=20.0, titulo='c')]
        desc = relatorios.ordenar_itens(itens, 'lucro', 'desc')
        asc = relatorios.ordenar_itens(itens, 'lucro', 'asc')
        self.assertEqual([i.titulo for i in desc], ['c', 'b', 'a'])
        self.assertEqual([i.titulo for i in asc], ['b', 'c', 'a'])


class TestFormatacao(unittest.TestCase):

    def test_formatar_eur(self):
        self.assertEqual(relatorios.formatar_eur(12.5), '€ 12.50')
        self.assertEqual(relatorios.formatar_eur(None), '€ 0.00')
        self.assertEqual(relatorios.formatar_eur(3, 'R$'), 'R$ 3.00')

    def test_formatar_percentual(self):
        self.assertEqual(relatorios.formatar_percentual(0.256), '25.6%')
        self.assertEqual(relatorios.formatar_percentual(None), '—')

    def test_formatar_dias(self):
        self.assertEqual(relatorios.formatar_dias(12.345), '12.3 dias')
        self.assertEqual(relatorios.formatar_dias(None), '—')


if __name__ == '__main__':
    unittest.main()

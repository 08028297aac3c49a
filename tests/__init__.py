"""
Pacote de testes automatizados (pytest).

Contém testes unitários do campo, do transporte, das fontes/sumidouros,
do orquestrador, do otimizador e da linha de comando.

Para executar todos os testes:
    pytest tests/ -v
"""

# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db fazenda.db
  python app.py procedures
  python app.py call get-animals
  python app.py call create-animal-type '"Vaca"' '"Gado leiteiro"'
  python app.py summary
  python app.py export transactions caixa.xlsx
"""

from fazenda.adapters.cli import main

if __name__ == "__main__":
    main()

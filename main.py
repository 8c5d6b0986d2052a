# main.py
import sys
import os

# Adiciona o diretório atual ao path para garantir que imports 'unit_converter' funcionem
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from unit_converter.ui.app import main

if __name__ == "__main__":
    main()

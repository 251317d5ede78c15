# logrelay/__main__.py
from logrelay.main import main

main()

"""``python -m devserver``"""

from devserver.server import main

main()

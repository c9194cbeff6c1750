from chaincaps.cli import main

main()

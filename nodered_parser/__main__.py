from nodered_parser.cli import main

main()

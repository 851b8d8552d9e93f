from linkharvest.interfaces.cli.cli import main

main()

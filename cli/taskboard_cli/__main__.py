from taskboard_cli.main import main

main()

from wc3launcher.cli import main

main()

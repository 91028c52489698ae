from autoyt.cli import main

main()

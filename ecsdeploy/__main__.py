from ecsdeploy.cli.app import main

main()

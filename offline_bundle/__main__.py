from offline_bundle.cli import main

main()

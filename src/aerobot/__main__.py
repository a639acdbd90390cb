from aerobot.main import main

main()

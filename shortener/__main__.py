from shortener.main import main

main()

from electroinit.pipeline import main

main()

from cbam_engine.cli import main

main()

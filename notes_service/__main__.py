from notes_service.cli import main

main()

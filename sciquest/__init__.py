"SciQuest Heroes authentication and profile layer"

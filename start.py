# start.py

from matchday.main import main

if __name__ == "__main__":
    main()
